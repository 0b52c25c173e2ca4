"""Entry point for ``python -m cargo_llvmcov``."""

from cargo_llvmcov.cli.main import main

if __name__ == "__main__":
    main()
