"""Protocol Buffers wire-format primitives: varints, field keys, field skipping and bytes/string codecs."""

__version__ = "0.6.1"