"""
Run the Regulations.gov Assistant CLI.

Usage:
    python run_cli.py [COMMAND] [OPTIONS]

Commands:
    ask        One-shot question answered with live Regulations.gov data
    chat       Interactive chat session (history kept for the session only)
    more       Next page of a previous search
    briefing   Personalized briefing from a description of you or your org
    status     Show which credentials are configured

Examples:
    python run_cli.py ask "open comment periods on drone rules"
    python run_cli.py more search_documents --input '{"searchTerm": "drones"}'
    python run_cli.py briefing "independent pharmacy in Ohio"

Environment variables: same as run_api.py.
"""

import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

from regassist.adapters.cli.main import app

if __name__ == "__main__":
    app()
