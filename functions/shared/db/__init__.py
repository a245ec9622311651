"""Azure SQL access for the ingestion function."""
