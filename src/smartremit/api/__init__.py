"""HTTP API for the remittance backend."""
