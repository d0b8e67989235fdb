"""Read WAD archives: lumps, names, records, levels, lighting, images, textures and metadata."""

__version__ = "0.1.0"

__all__ = [
    "archive",
    "errors",
    "image",
    "level",
    "light",
    "meta",
    "names",
    "reader",
    "tex",
    "types",
    "util",
]