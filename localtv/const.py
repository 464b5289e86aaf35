LANGUAGE_NAMES = {
    "eng": "English",
    "spa": "Español",
    "fre": "Français",
    "ger": "Deutsch",
    "ita": "Italiano",
    "por": "Português",
    "rus": "Русский",
    "jpn": "日本語",
    "chi": "中文",
    "kor": "한국어",
    "ara": "العربية",
    "und": "Desconocido",
}

# Matroska-family extensions the track parser understands
MATROSKA_EXTENSIONS = frozenset({".mkv", ".webm", ".mka", ".mks"})

DEFAULT_HEADER_PROBE_SIZE = 2 * 1024 * 1024  # 2 MiB
