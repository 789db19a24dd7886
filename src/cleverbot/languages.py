"""
Language codes accepted by the ``cb_config_language`` payload field.
"""

SUPPORTED_LANGUAGES: frozenset[str] = frozenset({
    "af", "ar", "az", "be", "bg", "bn", "bs", "ca", "cs", "cy",
    "da", "de", "el", "en", "eo", "es", "et", "eu", "fa", "fi",
    "fr", "ga", "gl", "gu", "he", "hi", "hr", "ht", "hu", "hy",
    "id", "is", "it", "ja", "ka", "kk", "km", "kn", "ko", "ky",
    "la", "lo", "lt", "lv", "mk", "ml", "mn", "mr", "ms", "mt",
    "my", "ne", "nl", "no", "pa", "pl", "pt", "ro", "ru", "si",
    "sk", "sl", "sq", "sr", "sv", "sw", "ta", "te", "tg", "th",
    "tl", "tr", "uk", "ur", "uz", "vi", "yi", "zh",
})
