from typing import Any, Dict, List, Tuple

import cv2
import numpy as np

import logging
logger = logging.getLogger("crewsched.image_processing")


class ScheduleImageProcessor:
    """Create OCR-friendly views of a roster screenshot (gray / enhanced / sharpened / binary / degridded)."""

    @staticmethod
    def decode(image_bytes: bytes) -> np.ndarray:
        arr = np.frombuffer(image_bytes, np.uint8)
        img = cv2.imdecode(arr, cv2.IMREAD_COLOR)
        if img is None:
            raise ValueError("Failed to decode image")
        return img

    @staticmethod
    def analyze_image(img: np.ndarray) -> Dict[str, Any]:
        gray = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
        lap_var = cv2.Laplacian(gray, cv2.CV_64F).var()
        contrast = gray.std()
        edges = cv2.Canny(gray, 50, 150)
        lines = cv2.HoughLinesP(edges, 1, np.pi / 180, 100, minLineLength=100, maxLineGap=10)
        has_grid = lines is not None and len(lines) > 15
        h, w = img.shape[:2]
        info = {
            "sharpness": float(lap_var),
            "contrast": float(contrast),
            "has_grid": has_grid,
            "is_landscape": (w / h) > 1.3 if h else False,
            "is_small": max(h, w) < 1200,
            "needs_enhancement": lap_var < 100 or contrast < 35,
            "is_very_blurry": lap_var < 50,
            "is_low_contrast": contrast < 25,
            "is_dark_mode": float(gray.mean()) < 100,
        }
        logger.info(
            f"Image analysis: sharp={info['sharpness']:.1f}, "
            f"contrast={info['contrast']:.1f}, grid={info['has_grid']}, "
            f"dark={info['is_dark_mode']}"
        )
        return info

    @staticmethod
    def _remove_grid(binary: np.ndarray) -> np.ndarray:
        # Calendar cell borders confuse Tesseract's line segmentation
        inverted = cv2.bitwise_not(binary)
        h_kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (40, 1))
        v_kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (1, 40))
        lines = cv2.add(
            cv2.morphologyEx(inverted, cv2.MORPH_OPEN, h_kernel),
            cv2.morphologyEx(inverted, cv2.MORPH_OPEN, v_kernel),
        )
        return cv2.bitwise_not(cv2.subtract(inverted, lines))

    @staticmethod
    def create_ocr_versions(img: np.ndarray) -> List[Tuple[np.ndarray, str]]:
        analysis = ScheduleImageProcessor.analyze_image(img)

        gray = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
        if analysis["is_dark_mode"]:
            gray = cv2.bitwise_not(gray)
        if analysis["is_small"]:
            gray = cv2.resize(gray, None, fx=2, fy=2, interpolation=cv2.INTER_CUBIC)

        versions: List[Tuple[np.ndarray, str]] = [(gray, "original")]

        if analysis["needs_enhancement"]:
            clahe = cv2.createCLAHE(clipLimit=3.0, tileGridSize=(8, 8))
            enhanced = clahe.apply(gray)
            versions.append((enhanced, "enhanced"))

            if analysis["is_very_blurry"]:
                denoised = cv2.fastNlMeansDenoising(enhanced, None, 10, 7, 21)
                kernel = np.array([[-1, -1, -1], [-1, 9, -1], [-1, -1, -1]])
                versions.append((cv2.filter2D(denoised, -1, kernel), "sharpened"))

        _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
        if analysis["is_low_contrast"]:
            versions.append((binary, "binary"))

        if analysis["has_grid"]:
            versions.append((ScheduleImageProcessor._remove_grid(binary), "degridded"))

        return versions
