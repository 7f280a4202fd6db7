"""ERP administration API."""
