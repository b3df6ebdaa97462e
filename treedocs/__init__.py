"""Generate browsable HTML documentation from the header comments of a source package."""
