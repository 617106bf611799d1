# ocr_reader.py
# Thin wrapper around Tesseract. The recognizer itself is a black box here;
# this module only handles invocation, timeouts and error mapping.

import asyncio
import functools as _functools

import numpy as np
import pytesseract
from PIL import Image

from config import OCR_TIMEOUT, TESSERACT_CMD, TESSERACT_CONFIG, TESSERACT_LANG, thread_pool
from logging_utils import get_logger
logger = get_logger("ocr_reader")

if TESSERACT_CMD:
    pytesseract.pytesseract.tesseract_cmd = TESSERACT_CMD


class OcrUnavailableError(RuntimeError):
    """Tesseract binary missing or not runnable."""


class OcrTimeoutError(RuntimeError):
    """Recognition exceeded OCR_TIMEOUT."""


def tesseract_available() -> bool:
    try:
        pytesseract.get_tesseract_version()
        return True
    except (pytesseract.TesseractNotFoundError, OSError):
        return False


class OcrReader:
    def __init__(
        self,
        lang: str = TESSERACT_LANG,
        config: str = TESSERACT_CONFIG,
        timeout: int = OCR_TIMEOUT,
    ) -> None:
        self.lang = lang
        self.config = config
        self.timeout = timeout

    def read_text_sync(self, img: np.ndarray) -> str:
        pil_image = Image.fromarray(img)
        try:
            text = pytesseract.image_to_string(
                pil_image,
                lang=self.lang,
                config=self.config,
                timeout=self.timeout,
            )
        except pytesseract.TesseractNotFoundError as e:
            raise OcrUnavailableError(str(e)) from e
        except RuntimeError as e:
            # pytesseract signals its own timeout with a bare RuntimeError
            if "timeout" in str(e).lower():
                raise OcrTimeoutError(f"OCR exceeded {self.timeout}s") from e
            raise
        logger.info(f"OCR extracted {len(text)} characters")
        return text

    async def read_text(self, img: np.ndarray) -> str:
        return await asyncio.get_running_loop().run_in_executor(
            thread_pool,
            _functools.partial(self.read_text_sync, img),
        )
