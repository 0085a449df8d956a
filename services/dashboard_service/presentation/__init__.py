from .alerts import Alert, AlertMonitor, AlertSettings
from .view import DashboardView, render_readouts

__all__ = ["Alert", "AlertMonitor", "AlertSettings", "DashboardView", "render_readouts"]
