from bsv_lsp.server import main

main()
