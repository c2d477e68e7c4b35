"""
Gateway service layer composing cache, sampler and transformer per route.
"""

from .orchestrator import GatewayOrchestrator

__all__ = ["GatewayOrchestrator"]
