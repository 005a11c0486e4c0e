from orderhub.upstream.dispatcher import DispatchResult, UpstreamDispatcher

__all__ = ["DispatchResult", "UpstreamDispatcher"]
