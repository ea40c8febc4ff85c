from pdf_chat.cli import run

run()
