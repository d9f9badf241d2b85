from tribler_arr_shim.main import run

run()
