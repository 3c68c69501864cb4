from service_reports.connectors.text_decoder import CancellationToken, TextDecoder, strip_bom

__all__ = [
    "CancellationToken",
    "TextDecoder",
    "strip_bom",
]
