"""
Configuration constants for imagedate.
"""
from datetime import timedelta

VERSION = "1.1"
PROGNAME = "imagedate"

# --- Sequencing Defaults ---
DEFAULT_BASE_DATE = "2000:01:01"
DEFAULT_BASE_TIME = "00:00:00"
DEFAULT_INTERVAL_MINUTES = 5

# EXIF style: "YYYY:MM:DD HH:MM:SS"
EXIF_DATE_FORMAT = "%Y:%m:%d"
EXIF_TIME_FORMAT = "%H:%M:%S"
EXIF_DATETIME_FORMAT = f"{EXIF_DATE_FORMAT} {EXIF_TIME_FORMAT}"

# --- Filesystem Timestamps ---
TOUCH_PAUSE = 0.005  # seconds between entries
TOUCH_OFFSET = timedelta(hours=-1)

# --- File Type Definitions ---
# Formats exiftool can write dates into
IMAGE_EXTS = {
    '.jpg', '.jpeg', '.jpe', '.png', '.tif', '.tiff', '.heic', '.heif',
    '.webp', '.gif', '.dng', '.cr2', '.cr3', '.nef', '.arw', '.orf', '.rw2',
}

# --- ExifTool ---
EXIFTOOL = "exiftool"
EXIFTOOL_TIMEOUT = 120  # seconds per call

ALL_DATES_TAG = "AllDates"
CREATE_DATE_TAG = "CreateDate"
DIGITIZED_TAG = "XMP-exif:DateTimeDigitized"
METADATA_DATE_TAG = "XMP-xmp:MetadataDate"

# --- Metadata Parsing (exifread keys) ---
EXIF_DATE_TAGS = {
    'date_time_original': 'EXIF DateTimeOriginal',
    'create_date': 'EXIF DateTimeDigitized',  # exiftool calls this CreateDate
    'modify_date': 'Image DateTime',
}
