"""
Allow running kerntune with ``python -m kerntune``.
"""

from kerntune.cli import main

if __name__ == "__main__":
    main()
