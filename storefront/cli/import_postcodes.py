from pathlib import Path
from typing import Optional

import click

from storefront.core.config import get_settings, load_env_file
from storefront.core.logging import configure_logging, get_logger
from storefront.infrastructure.database.mongodb.client import MongoDBClient
from storefront.infrastructure.repositories.postcode_repository import PostcodeRepository
from storefront.services.postcode_import import PostcodeImporter

logger = get_logger(__name__)


@click.command()
@click.argument("folder", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Where invalid_<file>.json reports are written (default: current directory)",
)
@click.option("--mongodb-uri", default=None, help="MongoDB connection URI (overrides MONGODB_URI)")
@click.option("--database", default=None, help="Database name (overrides MONGODB_DATABASE)")
def main(folder: Path, output_dir: Optional[Path], mongodb_uri: Optional[str], database: Optional[str]) -> None:
    """Import delivery prices from every CSV file in FOLDER.

    Files are read in name order and need Postcode, Economy and Premium
    columns. A file that fails is reported and skipped.
    """
    load_env_file()
    configure_logging()
    settings = get_settings()

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)

    db_client = MongoDBClient(
        connection_uri=mongodb_uri or settings.MONGODB_URI,
        database_name=database or settings.MONGODB_DATABASE,
        connect_timeout=settings.MONGODB_TIMEOUT_MS,
        connect_retries=settings.MONGODB_CONNECT_RETRIES,
    )
    try:
        importer = PostcodeImporter(PostcodeRepository(db_client), output_dir=output_dir)
        summary = importer.import_folder(folder)
    finally:
        db_client.close()

    for result in summary.files:
        if result.error:
            click.echo(f"FAILED   {result.file_name}: {result.error}", err=True)
        else:
            click.echo(f"imported {result.file_name}: {result.imported} rows, {result.invalid} invalid")

    click.echo(
        f"Done: {len(summary.files)} files, {summary.imported} rows imported, "
        f"{summary.invalid} invalid rows, {len(summary.failed)} failed files"
    )
    logger.info(
        "Postcode import finished",
        extra={"imported": summary.imported, "invalid": summary.invalid, "failed_files": len(summary.failed)},
    )


if __name__ == "__main__":
    main()
