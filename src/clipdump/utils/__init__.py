from clipdump.utils.imaging import encode_png, image_size, load_image
from clipdump.utils.paths import parse_path_list

__all__ = [
    'encode_png',
    'image_size',
    'load_image',
    'parse_path_list',
]
