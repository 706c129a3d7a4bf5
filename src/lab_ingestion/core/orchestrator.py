# ============================================================================
# src/lab_ingestion/core/orchestrator.py
# ============================================================================
"""
Lab Report Parser

This is the MAIN entry point for lab report ingestion.

Flow:
1. Rasterize the PDF (once)
2. Preprocess every page (concurrently)
3. Try the strategies in order:
   - VisionStrategy: all pages to Gemini in one request (when configured)
   - OcrStrategy: Tesseract + line reconstruction + field matching
4. Return the first result with at least one validated value, otherwise an
   empty result carrying every strategy's diagnostics

parse() never raises for bad input or failing services; the caller always
gets an ExtractionResult. Only cancellation propagates.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional, Sequence
import asyncio
import logging

from .context import (
    ExtractionOutcome,
    ExtractionResult,
    ExtractionSource,
    StrategyResult,
)
from ..config import ocr_settings, vision_settings, OCRSettings
from ..constants import messages
from ..extractors.ocr_extractor import WordRecognizer
from ..extractors.pdf_rasterizer import PageBitmap, rasterize_pdf
from ..extractors.tessdata import TessdataManager, get_tessdata_manager
from ..extractors.vision_parser import parse_vision_response
from ..extractors.vlm_client import GeminiVisionClient
from ..preprocessors.image_preprocessor import ImagePreprocessor
from ..processors.lab.field_matcher import FieldMatcher
from ..processors.lab.line_reconstructor import group_words_into_lines
from ..processors.lab.ocr_line_processor import OcrLineProcessor
from ..processors.lab.report_date import detect_report_date
from ..utils.exceptions import (
    FatalDocumentError,
    ImagePreprocessingError,
    TransientServiceError,
    VisionResponseError,
)
from ..utils.logging import log_duration
from ..validators import RangeValidator

logger = logging.getLogger(__name__)


def check_cancelled(cancel_event: Optional[asyncio.Event]):
    """Raise CancelledError when the caller has signalled cancellation."""
    if cancel_event is not None and cancel_event.is_set():
        raise asyncio.CancelledError()


class ExtractionStrategy(ABC):
    """
    One way of turning preprocessed pages into values.

    Subclasses must implement:
    - name: strategy identifier, also stored as the result source
    - extract(): the extraction itself
    """

    name: str = "strategy"

    @abstractmethod
    async def extract(
        self,
        images: Sequence[bytes],
        cancel_event: Optional[asyncio.Event] = None
    ) -> ExtractionResult:
        pass

    def error_message(self, error: Exception) -> str:
        """User-facing diagnostic for an exception raised by extract()."""
        return messages.PARSE_ERROR.format(message=error)


class VisionStrategy(ExtractionStrategy):
    """All pages to the vision model in a single request."""

    name = ExtractionSource.VISION.value

    def __init__(
        self,
        client: GeminiVisionClient,
        matcher: FieldMatcher,
        validator: RangeValidator,
    ):
        self.client = client
        self.matcher = matcher
        self.validator = validator

    async def extract(
        self,
        images: Sequence[bytes],
        cancel_event: Optional[asyncio.Event] = None
    ) -> ExtractionResult:
        result = ExtractionResult(source=self.name)

        check_cancelled(cancel_event)
        with log_duration(logger, f"Vision request ({len(images)} pages)"):
            reply = await self.client.extract_table_data(list(images))
        check_cancelled(cancel_event)

        if not reply:
            logger.warning("Vision model returned no text")
            return result

        parse_vision_response(reply, result, self.matcher, self.validator)
        return result

    def error_message(self, error: Exception) -> str:
        if isinstance(error, (TransientServiceError, VisionResponseError)):
            return messages.VISION_ERROR.format(message=error)
        return super().error_message(error)


class OcrStrategy(ExtractionStrategy):
    """Local Tesseract OCR with line reconstruction and field matching."""

    name = ExtractionSource.OCR.value

    def __init__(
        self,
        tessdata: TessdataManager,
        line_processor: OcrLineProcessor,
        recognizer_factory: Optional[Callable[[Path], WordRecognizer]] = None,
        settings: Optional[OCRSettings] = None,
    ):
        self.tessdata = tessdata
        self.line_processor = line_processor
        self.recognizer_factory = recognizer_factory or (lambda path: WordRecognizer(path))
        self.settings = settings or ocr_settings

    async def extract(
        self,
        images: Sequence[bytes],
        cancel_event: Optional[asyncio.Event] = None
    ) -> ExtractionResult:
        result = ExtractionResult(source=self.name)

        check_cancelled(cancel_event)
        tessdata_dir = await self.tessdata.ensure_languages()
        check_cancelled(cancel_event)

        # One recognizer per extraction call, never shared between requests
        recognizer = self.recognizer_factory(tessdata_dir)
        report_date = None

        for page_number, image in enumerate(images, start=1):
            check_cancelled(cancel_event)

            page = await asyncio.to_thread(recognizer.recognize, image, page_number)
            lines = group_words_into_lines(page.words, self.settings.LINE_GROUPING_TOLERANCE)

            if report_date is None:
                report_date = detect_report_date(lines)

            self.line_processor.process_page(lines, result)

        if report_date is not None:
            result.report_date = report_date

        return result


class LabReportParser:
    """
    Lab report ingestion pipeline.

    Example:
        parser = LabReportParser()
        result = await parser.parse(pdf_bytes, label="April checkup")
        result.values  # {"testosterone": 24.67, ...}
    """

    def __init__(
        self,
        vision_client: Optional[GeminiVisionClient] = None,
        tessdata: Optional[TessdataManager] = None,
        preprocessor: Optional[ImagePreprocessor] = None,
        matcher: Optional[FieldMatcher] = None,
        validator: Optional[RangeValidator] = None,
        recognizer_factory: Optional[Callable[[Path], WordRecognizer]] = None,
        vision_enabled: Optional[bool] = None,
    ):
        self.matcher = matcher or FieldMatcher()
        self.validator = validator or RangeValidator()
        self.preprocessor = preprocessor or ImagePreprocessor()
        self.vision_client = vision_client or GeminiVisionClient()
        self.tessdata = tessdata or get_tessdata_manager()
        self.recognizer_factory = recognizer_factory
        self.vision_enabled = (
            vision_settings.VISION_ENABLED if vision_enabled is None else vision_enabled
        )

    def strategies(self) -> List[ExtractionStrategy]:
        """Strategies in the order they are tried."""
        chain: List[ExtractionStrategy] = []
        if self.vision_enabled and self.vision_client.is_available:
            chain.append(VisionStrategy(self.vision_client, self.matcher, self.validator))
        chain.append(OcrStrategy(
            self.tessdata,
            OcrLineProcessor(self.matcher, self.validator),
            self.recognizer_factory,
        ))
        return chain

    async def parse(
        self,
        pdf_bytes: bytes,
        label: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> ExtractionResult:
        """
        Extract lab values from a PDF.

        Args:
            pdf_bytes: Uploaded PDF content
            label: Caller's free-text label, passed through to the result
            cancel_event: Optional event; when set, parsing stops at the next
                page boundary or network call with CancelledError

        Returns:
            ExtractionResult (never raises for bad input or failing services)

        Raises:
            asyncio.CancelledError: the task was cancelled or cancel_event set
        """
        with log_duration(logger, "Lab report parsing"):
            try:
                bitmaps = await asyncio.to_thread(rasterize_pdf, pdf_bytes)
            except FatalDocumentError as e:
                logger.error(f"Unreadable document: {e}")
                return self._failure(messages.PARSE_ERROR.format(message=e), label)
            except Exception as e:
                logger.error(f"Rasterization failed: {e}", exc_info=True)
                return self._failure(messages.PARSE_ERROR.format(message=e), label)

            check_cancelled(cancel_event)
            if not bitmaps:
                return self._failure(messages.NO_PAGES, label)

            try:
                images = await self._preprocess_pages(bitmaps)
            except ImagePreprocessingError as e:
                logger.error(f"Page preprocessing failed: {e}")
                return self._failure(messages.PARSE_ERROR.format(message=e), label)
            except Exception as e:
                logger.error(f"Page preprocessing failed: {e}", exc_info=True)
                return self._failure(messages.PARSE_ERROR.format(message=e), label)

            runs: List[StrategyResult] = []
            for strategy in self.strategies():
                check_cancelled(cancel_event)
                run = await self._run_strategy(strategy, images, cancel_event)
                runs.append(run)
                if run.outcome == ExtractionOutcome.HAS_VALUES:
                    run.result.label = label
                    logger.info(
                        f"{strategy.name} strategy extracted {len(run.result.values)} values",
                        extra={"strategy": strategy.name}
                    )
                    return run.result

            return self._merge_failures(runs, label)

    async def _preprocess_pages(self, bitmaps: Sequence[PageBitmap]) -> List[bytes]:
        return list(await asyncio.gather(*(
            asyncio.to_thread(self.preprocessor.preprocess, page.pixels)
            for page in bitmaps
        )))

    async def _run_strategy(
        self,
        strategy: ExtractionStrategy,
        images: Sequence[bytes],
        cancel_event: Optional[asyncio.Event]
    ) -> StrategyResult:
        try:
            result = await strategy.extract(images, cancel_event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                f"{strategy.name} strategy failed: {e}",
                exc_info=True,
                extra={"strategy": strategy.name}
            )
            result = ExtractionResult(source=strategy.name)
            result.add_unrecognized(strategy.error_message(e))
            return StrategyResult(strategy.name, ExtractionOutcome.ERROR, result)

        outcome = result.outcome
        if outcome == ExtractionOutcome.NO_VALUES:
            logger.warning(
                f"{strategy.name} strategy found no values", extra={"strategy": strategy.name}
            )
        return StrategyResult(strategy.name, outcome, result)

    @staticmethod
    def _failure(message: str, label: Optional[str]) -> ExtractionResult:
        result = ExtractionResult(label=label)
        result.add_unrecognized(message)
        return result

    @staticmethod
    def _merge_failures(runs: Sequence[StrategyResult], label: Optional[str]) -> ExtractionResult:
        """Empty-values result with every strategy's diagnostics, deduplicated."""
        merged = ExtractionResult(label=label)
        for run in runs:
            for item in run.result.unrecognized_items:
                if item not in merged.unrecognized_items:
                    merged.add_unrecognized(item)
        if runs:
            merged.report_date = runs[-1].result.report_date
        return merged
