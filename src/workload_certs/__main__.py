"""Run the refresher CLI with ``python -m workload_certs``."""
from workload_certs.cli.main import cli

if __name__ == "__main__":
    cli()
