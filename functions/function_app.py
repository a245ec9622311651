"""Azure Functions app using v2 programming model.

Requires AzureWebJobsFeatureFlags=EnableWorkerIndexing app setting.

Blob trigger: Decode → Parse → Validate schema → Upsert into Students.

Failures are logged and never re-raised, so a bad file is not redelivered
by the host.
"""

import logging

import azure.functions as func

# Lazy imports to avoid startup failures - these are imported inside functions
# from shared.config import get_config
# from shared.ingest import ingest_csv_blob
# from shared.logging_utils import structured_logger
# from shared.storage import SqlStudentStore

app = func.FunctionApp()


@app.function_name(name="processCsvBlobFunction")
@app.blob_trigger(
    arg_name="blob",
    path="democsv/{name}",
    connection="AzureWebJobsStorage",
)
def process_csv_blob(blob: func.InputStream) -> None:
    """Upsert the students listed in an uploaded CSV file.

    Args:
        blob: Input stream from blob trigger
    """
    handle_csv_blob(blob)


def handle_csv_blob(blob: func.InputStream) -> str:
    """Run one ingestion and return its final status.

    Never raises: the host would otherwise redeliver the blob.

    Args:
        blob: Input stream (anything with name and read())

    Returns:
        Final ProcessingStatus value, or "ABORTED" on an unexpected error
    """
    filename = blob.name or "unknown"
    status_str = "RECEIVED"

    try:
        # Lazy imports to avoid startup failures
        from shared.config import get_config
        from shared.ingest import ingest_csv_blob
        from shared.logging_utils import structured_logger
        from shared.storage import SqlStudentStore

        config = get_config()
        store = SqlStudentStore(
            config.sql_connection_string,
            use_managed_identity=config.use_managed_identity,
        )

        with structured_logger.timed_operation("read", "Read blob content", file_path=filename) as ctx:
            content = blob.read()
            ctx["bytes_read"] = len(content)

        result = ingest_csv_blob(content, filename, config, store, structured_logger)
        status_str = result.status.value

    except Exception as e:
        status_str = "ABORTED"
        logging.error(f"Processing failed: {e!s}", exc_info=True)

    finally:
        logging.info(f"Processing finished with status: {status_str}")

    return status_str
