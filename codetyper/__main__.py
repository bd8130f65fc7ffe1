from codetyper.app import run

run()
