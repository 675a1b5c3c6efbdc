from setuptools import setup
import os

__version__ = "0.0.0"
with open("plc5comm/_version.py") as f:
    exec(f.read())


def read(file_name):
    return open(os.path.join(os.path.dirname(__file__), file_name)).read()


setup(
    name="plc5comm",
    version=__version__,
    author="Ian Ottoway",
    author_email="ian@ottoway.dev",
    description="A Python library for reading and writing Allen-Bradley PLC-5 data files with PCCC word-range commands.",
    long_description=read("README.rst"),
    license="MIT",
    packages=["plc5comm"],
    package_data={"plc5comm": ["py.typed"]},
    python_requires=">=3.6.1",
    include_package_data=True,
    extras_require={
        'tests': ['pytest']
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Manufacturing",
        "Natural Language :: English",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
        "Topic :: Scientific/Engineering :: Human Machine Interfaces",
    ],
)

# Build and Publish Commands:
#
# python -m build
# twine upload --skip-existing dist/*
