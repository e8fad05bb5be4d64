from web3 import Web3

# Minimal ABIs (fragments), only what is used

ABI_LENS = [
  {"name":"getAmountOut","outputs":[
    {"type":"address","name":"router"},
    {"type":"uint256","name":"amountOut"}],
   "inputs":[
    {"type":"address","name":"_token"},
    {"type":"uint256","name":"_amountIn"},
    {"type":"bool","name":"_isBuy"}],
   "stateMutability":"view","type":"function"},
]

# Same selectors on the bonding-curve router and the DEX router
ABI_ROUTER = [
  {"name":"buy","outputs":[],
   "inputs":[{"components":[
      {"type":"uint256","name":"amountOutMin"},
      {"type":"address","name":"token"},
      {"type":"address","name":"to"},
      {"type":"uint256","name":"deadline"}],
     "type":"tuple","name":"params"}],
   "stateMutability":"payable","type":"function"},
  {"name":"sell","outputs":[],
   "inputs":[{"components":[
      {"type":"uint256","name":"amountIn"},
      {"type":"uint256","name":"amountOutMin"},
      {"type":"address","name":"token"},
      {"type":"address","name":"to"},
      {"type":"uint256","name":"deadline"}],
     "type":"tuple","name":"params"}],
   "stateMutability":"nonpayable","type":"function"},
]

ABI_ERC20 = [
  {"name":"balanceOf","outputs":[{"type":"uint256"}],"inputs":[{"type":"address"}],"stateMutability":"view","type":"function"},
  {"name":"allowance","outputs":[{"type":"uint256"}],
   "inputs":[{"type":"address","name":"owner"},{"type":"address","name":"spender"}],
   "stateMutability":"view","type":"function"},
  {"name":"approve","outputs":[{"type":"bool"}],
   "inputs":[{"type":"address","name":"spender"},{"type":"uint256","name":"amount"}],
   "stateMutability":"nonpayable","type":"function"},
]


class Chain:
    def __init__(self, w3: Web3, lens_addr: str):
        self.w3 = w3
        self.lens = self.w3.eth.contract(address=Web3.to_checksum_address(lens_addr), abi=ABI_LENS)

    @classmethod
    def connect(cls, rpc_url: str, lens_addr: str) -> "Chain":
        w3 = Web3(Web3.HTTPProvider(rpc_url))
        if not w3.is_connected():
            raise ConnectionError(f"could not reach RPC at {rpc_url}")
        return cls(w3, lens_addr)

    def router(self, addr: str):
        return self.w3.eth.contract(address=Web3.to_checksum_address(addr), abi=ABI_ROUTER)

    def erc20(self, addr: str):
        return self.w3.eth.contract(address=Web3.to_checksum_address(addr), abi=ABI_ERC20)
