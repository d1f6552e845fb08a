"""Product model and file I/O."""

from chrisbox.io.product import Band, ChrisProduct, read_product, write_product

__all__ = ['Band', 'ChrisProduct', 'read_product', 'write_product']
