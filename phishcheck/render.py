import json

from jinja2 import Template

from .models import ScoreReport

CYAN = "\033[36m"
RESET = "\033[0m"

BANNER_TEMPLATE = Template(
    "==================================================\n"
    " 🛡️  Phishing Page Detection Tool\n"
    " Version: {{ cyan }}{{ version }}{{ reset }}\n"
    "=================================================="
)

PRETTY_TEMPLATE = Template("""
Issues found:
{% for issue in r.issues %}  - {{ issue }}
{% else %}  None detected by heuristics.
{% endfor %}
{%- if r.notes %}
Notes:
{% for note in r.notes %}  - {{ note.text }}
{% endfor %}
{%- endif %}
🔎 Total Risk Score: {{ r.total_score }}
📊 Risk Level: {{ r.risk_level.label }}

{% if logged %}Log saved to: {{ log_path }}{% else %}Log could not be written to: {{ log_path }}{% endif %}""")

def render_banner(version: str, color: bool = True) -> str:
    return BANNER_TEMPLATE.render(
        version=version,
        cyan=CYAN if color else "",
        reset=RESET if color else "",
    )

def render_json(report: ScoreReport) -> str:
    return json.dumps(report.to_dict(), indent=2)

def render_pretty(report: ScoreReport, log_path, logged: bool = True) -> str:
    return PRETTY_TEMPLATE.render(r=report, log_path=log_path, logged=logged)
