"""Teams bot: Bot Framework adapter, activity handler and cards."""
