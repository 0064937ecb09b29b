"""Rain dashboard for São Paulo, backed by the Open-Meteo forecast API."""
