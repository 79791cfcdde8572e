from .load import (
    check_basic_content_presence,
    check_no_critical_loading_indicators,
    check_no_unhandled_network_failures,
    check_page_found,
    check_page_is_loaded,
    check_transient_visibility,
)

__all__ = [
    "check_basic_content_presence",
    "check_no_critical_loading_indicators",
    "check_no_unhandled_network_failures",
    "check_page_found",
    "check_page_is_loaded",
    "check_transient_visibility",
]
