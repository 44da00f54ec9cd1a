"""Layout engine and graph payload loading."""
