"""americano - keep the machine awake for a while or while a process runs"""
