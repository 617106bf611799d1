from typing import Dict, List, Optional

import asyncio
import functools as _functools

import cv2
import numpy as np
from fastapi import HTTPException
from pdf2image import convert_from_bytes
from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError

from config import MAX_WORKERS, thread_pool
from logging_utils import get_logger
logger = get_logger("pdf_processor")


def is_pdf(file_bytes: bytes, content_type: Optional[str] = None) -> bool:
    """Check if file is PDF via MIME type or magic bytes."""
    if content_type and "pdf" in content_type.lower():
        return True
    return file_bytes[:4] == b"%PDF"


class PDFProcessor:
    @staticmethod
    async def convert(pdf_bytes: bytes) -> List[np.ndarray]:
        timing: Dict[str, float] = {}
        with logger.timed("pdf_conversion", timing):
            try:
                pil_images = await asyncio.get_running_loop().run_in_executor(
                    thread_pool,
                    _functools.partial(
                        convert_from_bytes,
                        pdf_bytes,
                        dpi=300,
                        fmt="PNG",
                        thread_count=min(4, MAX_WORKERS),
                    ),
                )
            except (PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError) as e:
                raise HTTPException(422, f"PDF processing failed: {e}")

            cv_images: List[np.ndarray] = []
            for pil_img in pil_images:
                arr = np.array(pil_img)
                if len(arr.shape) == 2:
                    cv_images.append(cv2.cvtColor(arr, cv2.COLOR_GRAY2BGR))
                else:
                    cv_images.append(cv2.cvtColor(arr, cv2.COLOR_RGB2BGR))
        logger.info(f"Converted {len(cv_images)} PDF pages in {timing['pdf_conversion']:.2f}s")
        return cv_images
