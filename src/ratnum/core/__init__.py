"""
Core модули ratnum: конфигурация, ошибки, предусловия, математика, домен.
"""
