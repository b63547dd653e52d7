"""Forum automation flows: profile selection, login, plugin lookup, paste."""
