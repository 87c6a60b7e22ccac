"""Constants shared across bundle domain models."""

SIGNATURE_SUFFIX = ".asc"
JAR_EXTENSION = "jar"

MODULE_METADATA_FILE = "module.json"
POM_FILE = "pom-default.xml"

AGGREGATE_FOLDER_NAME = "aggregate"
ARCHIVE_FILE_NAME = "upload.zip"

REQUIRED_ALGORITHMS = ("MD5", "SHA-1")
