"""
Agents for CV Hjelper.

- analysis: Criterion agents, language detection and overall summary
- evaluation: Single-call evaluator, checklist analysis, streamed summary
- customization: Requirements analysis and CV tailoring
- validation: Fact-checking and correction of tailored content
- pipelines: Fan-out/fan-in orchestration with progress reporting
"""

from cvhjelper.agents.models import create_chat_model
from cvhjelper.agents.pipelines import run_customization, run_cv_analysis, run_quick_analysis

__all__ = ["create_chat_model", "run_customization", "run_cv_analysis", "run_quick_analysis"]
