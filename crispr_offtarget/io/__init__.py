"""
I/O modules for crispr_offtarget.
"""

from .guide_key import (
    GuideSpec,
    create_guide_key_template,
    load_guide_key,
)
from .output import (
    OUTPUT_FORMATS,
    GuideReport,
    format_result_summary,
    reports_to_dataframe,
    sites_to_dataframe,
    write_batch_report,
    write_batch_summary_tsv,
    write_prediction_outputs,
    write_result_json,
    write_sites_tsv,
    write_summary_report,
)

__all__ = [
    'GuideSpec',
    'load_guide_key',
    'create_guide_key_template',
    'OUTPUT_FORMATS',
    'GuideReport',
    'sites_to_dataframe',
    'reports_to_dataframe',
    'format_result_summary',
    'write_sites_tsv',
    'write_result_json',
    'write_summary_report',
    'write_prediction_outputs',
    'write_batch_summary_tsv',
    'write_batch_report',
]
