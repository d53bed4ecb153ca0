"""Browser support components: request interceptor chains, cookie exception tables, raw-file images, file age scanning and QR code rendering."""

__version__ = "0.1.0"