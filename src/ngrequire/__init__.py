"""
ngrequire - required input checks for Angular component templates

Cross-references the inputs each component declares with the inputs supplied
wherever the component is used, and reports usages that omit a required one.
"""

from importlib.metadata import version

from ngrequire.core.config import RequirednessMode, RuleOptions
from ngrequire.core.types import Finding
from ngrequire.rule import TemplatesRequireInputsRule
from ngrequire.structure.session import AnalysisSession

__version__ = version("ngrequire")

__all__ = [
    "__version__",
    "AnalysisSession",
    "Finding",
    "RequirednessMode",
    "RuleOptions",
    "TemplatesRequireInputsRule",
]
