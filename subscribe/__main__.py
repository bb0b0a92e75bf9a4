"""Package entry point for ``python -m subscribe``.

WHY: Users run the builder as ``python -m subscribe captions.json3`` in
addition to the ``subscribe`` console script.

HOW: Delegates to the CLI's main() function.
"""

from subscribe.cli import main

if __name__ == "__main__":
    main()
