"""StockPoint POS backend."""
