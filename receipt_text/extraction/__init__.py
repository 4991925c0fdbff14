"""Pattern tables, amount helpers, the receipt text parser and drafts."""
