LOG_SETTINGS = {
    'level': 'WARNING',
    'enable_console': True,
    'enable_file': False,
    'file_name': '~/.jpeg_structure/jpeg_structure.log',
    'file_size': 1e6,
    'file_count': 5,
}

READER_SETTINGS = {
    # Bytes requested from the source on every refill
    'chunk_size': 4096,
}
