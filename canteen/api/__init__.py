# canteen/api/__init__.py
