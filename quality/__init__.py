from quality.monitor import (
    DataQualitySummary,
    OutlierFlag,
    assess_data_quality,
    quality_from_snapshot,
)

__all__ = ["DataQualitySummary", "OutlierFlag", "assess_data_quality", "quality_from_snapshot"]
