from httpreq.cli import main

main(prog_name="httpreq")
