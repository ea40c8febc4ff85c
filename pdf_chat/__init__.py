# PDF chat (RAG over a single PDF) package
