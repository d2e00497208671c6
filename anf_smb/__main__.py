from anf_smb.main import run

run()
