"""RefugeeConnect Uganda: information hub and AI assistant backend for refugees in Uganda."""
