__version_info__ = (0, 1, 0)
__version__ = ".".join(f"{x}" for x in __version_info__)
