"""Progress core: state variants, rendering and output sinks."""
