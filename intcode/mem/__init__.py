"""Program store: the machine's only memory."""
