"""Mock scan source.

Generates randomised but well-formed results in the shape the real
acquisition pipeline (microscope feed + detection models) will return.
"""

from __future__ import annotations

import random
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from microscopy.config import DEFAULT_LOCATION
from microscopy.errors import AcquisitionError
from microscopy.models.schemas import (
    AnalysisResult,
    EnvironmentalData,
    HighRiskAlert,
    RiskLevel,
    SpeciesCount,
    utcnow,
)
from microscopy.utils.logger import get_logger

logger = get_logger(__name__)

IMAGE_URL_TEMPLATE = "https://placehold.co/600x400/1f2937/a0aec0?text=Microscope+Feed+{frame}"

# (species, low, high) inclusive count ranges
SPECIES_RANGES: List[Tuple[str, int, int]] = [
    ("Chaetoceros", 30, 49),
    ("Thalassiosira", 25, 44),
    ("Prorocentrum", 15, 29),
    ("Dinophysis", 5, 14),
    ("Other", 10, 19),
]


class MockScanSource:
    """Random result generator.

    Args:
        seed: seed for a private ``random.Random`` (reproducible scans)
        location: site label reported in the environmental block
        failure_rate: probability in [0, 1] that produce() raises
            AcquisitionError, to exercise the error path
        clock: returns the scan timestamp; defaults to now (UTC)
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        location: str = DEFAULT_LOCATION,
        failure_rate: float = 0.0,
        clock: Callable[[], datetime] = utcnow,
    ):
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")
        self._rng = random.Random(seed)
        self.location = location
        self.failure_rate = failure_rate
        self._clock = clock

    def produce(self) -> AnalysisResult:
        rng = self._rng
        if self.failure_rate and rng.random() < self.failure_rate:
            logger.warning("Mock instrument reported unavailable")
            raise AcquisitionError("Microscope feed unavailable")

        dinophysis = rng.randint(5, 14)
        result = AnalysisResult(
            image_ref=IMAGE_URL_TEMPLATE.format(frame=rng.randint(0, 99)),
            total_organisms=rng.randint(50, 149),
            unique_species_count=rng.randint(8, 12),
            high_risk_alerts=(
                HighRiskAlert(
                    name="Dinophysis",
                    species="Dinoflagellate",
                    count=dinophysis,
                    risk_level=RiskLevel.HIGH.value,
                ),
            ),
            environmental=EnvironmentalData(
                location=self.location,
                temperature=f"{rng.uniform(27.0, 29.0):.1f}°C",
                timestamp_utc=self._clock(),
            ),
            species_distribution=tuple(
                SpeciesCount(name=name, count=rng.randint(low, high))
                for name, low, high in SPECIES_RANGES
            ),
        )
        logger.debug("Mock scan produced %s", result.id)
        return result
