"""RU: Вспомогательные утилиты.

EN: Shared helpers.
"""
