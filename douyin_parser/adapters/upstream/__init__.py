from douyin_parser.adapters.upstream.hybrid_client import HybridApiClient

__all__ = ["HybridApiClient"]
