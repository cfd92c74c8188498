# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for the loyalty log analyzer.

Commands are organized into separate modules:
- shared.py: Colors, icons and logging setup
- report.py: Loyal user report
- seed.py: Synthetic log generation
- config.py: Configuration display
"""
