"""
Font resolver for non-Latin scripts.

Maps a target language to a Noto font, downloading it into a local cache the
first time it is needed. Latin-script languages need no extra font.
"""

import logging
from pathlib import Path
from typing import Optional, Dict

import httpx

logger = logging.getLogger(__name__)


class FontResolver:
    """Resolve and cache fonts for different language scripts."""

    FONT_URLS = {
        "thai": "https://github.com/google/fonts/raw/main/ofl/notoserifthai/NotoSerifThai%5Bwdth%2Cwght%5D.ttf",
        "arabic": "https://github.com/google/fonts/raw/main/ofl/notosansarabic/NotoSansArabic%5Bwdth%2Cwght%5D.ttf",
        "chinese": "https://github.com/google/fonts/raw/main/ofl/notosanssc/NotoSansSC%5Bwght%5D.ttf",
        "japanese": "https://github.com/google/fonts/raw/main/ofl/notosansjp/NotoSansJP%5Bwght%5D.ttf",
        "korean": "https://github.com/google/fonts/raw/main/ofl/notosanskr/NotoSansKR%5Bwght%5D.ttf",
        "cyrillic": "https://github.com/google/fonts/raw/main/ofl/notosans/NotoSans%5Bwdth%2Cwght%5D.ttf",
        "greek": "https://github.com/google/fonts/raw/main/ofl/notosans/NotoSans%5Bwdth%2Cwght%5D.ttf",
        "hebrew": "https://github.com/google/fonts/raw/main/ofl/notosanshebrew/NotoSansHebrew%5Bwdth%2Cwght%5D.ttf",
        "devanagari": "https://github.com/google/fonts/raw/main/ofl/notosansdevanagari/NotoSansDevanagari%5Bwdth%2Cwght%5D.ttf",
        "vietnamese": "https://github.com/google/fonts/raw/main/ofl/notosans/NotoSans%5Bwdth%2Cwght%5D.ttf",
    }

    LANG_TO_SCRIPT = {
        "th": "thai",
        "ar": "arabic",
        "fa": "arabic",
        "zh": "chinese",
        "zh-cn": "chinese",
        "zh-tw": "chinese",
        "ja": "japanese",
        "ko": "korean",
        "ru": "cyrillic",
        "uk": "cyrillic",
        "bg": "cyrillic",
        "el": "greek",
        "he": "hebrew",
        "hi": "devanagari",
        "mr": "devanagari",
        "ne": "devanagari",
        "vi": "vietnamese",
    }

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        download_enabled: bool = True,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize font resolver.

        Args:
            cache_dir: Directory to cache fonts (default: ~/.pagetran/fonts)
            download_enabled: Whether to download fonts if missing
            timeout: Download timeout in seconds
            transport: httpx transport for downloads (default: network)
        """
        self.cache_dir = Path(cache_dir) if cache_dir else Path.home() / ".pagetran" / "fonts"
        self.download_enabled = download_enabled
        self.timeout = timeout
        self.transport = transport
        self._font_cache: Dict[str, Path] = {}

    @classmethod
    def script_for(cls, lang_code: str) -> Optional[str]:
        code = lang_code.lower()
        return cls.LANG_TO_SCRIPT.get(code) or cls.LANG_TO_SCRIPT.get(code.split("-")[0])

    def get_font_for_language(self, lang_code: str) -> Optional[Path]:
        """
        Get font path for a language.

        Args:
            lang_code: Language code (e.g., 'th', 'zh', 'ja')

        Returns:
            Path to font file, or None for Latin-script languages or when the
            font is missing and downloads are disabled
        """
        lang_code = lang_code.lower()
        if lang_code in self._font_cache:
            return self._font_cache[lang_code]

        script = self.script_for(lang_code)
        if not script:
            logger.debug(f"Language {lang_code} uses Latin script (no special font needed)")
            return None

        font_path = self.cache_dir / f"noto-{script}.ttf"
        if font_path.exists():
            logger.debug(f"Using cached font for {lang_code}: {font_path}")
            self._font_cache[lang_code] = font_path
            return font_path

        if not self.download_enabled:
            logger.warning(f"Font for {lang_code} not available (download disabled)")
            return None

        logger.info(f"Downloading font for {lang_code} ({script})...")
        self._download_font(self.FONT_URLS[script], font_path)
        self._font_cache[lang_code] = font_path
        return font_path

    def _download_font(self, url: str, dest_path: Path):
        """Download a font file to ``dest_path`` through a temp file."""
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = dest_path.with_suffix('.tmp')

        try:
            with httpx.Client(transport=self.transport, follow_redirects=True, timeout=self.timeout) as client:
                response = client.get(url)
            response.raise_for_status()
            data = response.content
            if len(data) < 1000:
                raise ValueError("Downloaded file too small to be a valid font")

            temp_path.write_bytes(data)
            temp_path.replace(dest_path)
            logger.info(f"Downloaded font: {dest_path} ({len(data)} bytes)")
        finally:
            if temp_path.exists():
                temp_path.unlink()

