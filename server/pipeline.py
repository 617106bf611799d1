from typing import Dict, List, Optional, Tuple

import numpy as np

from crew_schedule import ExtractionRules, ScheduleConfig, extract_from_source
from image_processing import ScheduleImageProcessor
from logging_utils import get_logger
logger = get_logger("pipeline")
from models import PipelineResult
from ocr_reader import OcrReader


class SchedulePipeline:
    """Images -> OCR variants -> best text per page -> one schedule for the whole document."""

    def __init__(
        self,
        reader: Optional[OcrReader] = None,
        rules: Optional[ExtractionRules] = None,
        stop_on_first_success: bool = True,
    ) -> None:
        self.processor = ScheduleImageProcessor()
        self.reader = reader or OcrReader()
        self.rules = rules
        self.stop_on_first_success = stop_on_first_success

    async def _best_page_text(
        self,
        img: np.ndarray,
        config: ScheduleConfig,
        page_key: str,
        timing: Dict[str, float],
    ) -> Tuple[str, Optional[str]]:
        """Run OCR over every preprocessing variant and keep the text yielding the most days."""
        best_text, best_variant, best_count = "", None, -1

        for img_array, vtype in self.processor.create_ocr_versions(img):
            with logger.timed(f"{page_key}_ocr_{vtype}", timing):
                text = await self.reader.read_text(img_array)

            schedule, _ = extract_from_source(text, config, self.rules)
            logger.log_extraction(len(schedule), vtype, "ocr")

            if len(schedule) > best_count:
                best_text, best_variant, best_count = text, vtype, len(schedule)

            if best_count > 0 and self.stop_on_first_success:
                break

        return best_text, best_variant

    async def process(self, images: List[np.ndarray], config: ScheduleConfig) -> PipelineResult:
        timing: Dict[str, float] = {}
        page_texts: List[str] = []
        variants: List[str] = []

        with logger.timed("total", timing):
            for page_num, img in enumerate(images, 1):
                page_key = f"page_{page_num}"
                with logger.timed(f"{page_key}_total", timing):
                    text, variant = await self._best_page_text(img, config, page_key, timing)

                page_texts.append(text)
                if variant:
                    variants.append(variant)
                logger.info(f"Page {page_num}: best OCR variant {variant}")

            # Pages are read as one continuous stream so a day context can span a page break
            raw_text = "\n".join(page_texts)
            with logger.timed("extract", timing):
                schedule, method = extract_from_source(raw_text, config, self.rules)
            logger.info(f"Document: {len(schedule)} schedule days via {method}")

        return PipelineResult(
            schedule=schedule,
            raw_text=raw_text,
            variant="+".join(sorted(set(variants))) or None,
            extraction_method="ocr",
            processing_time=timing,
        )
