from fr_law.api.routes.tools import tools_bp
from fr_law.api.routes.monitoring import monitoring_bp

__all__ = ['tools_bp', 'monitoring_bp']
